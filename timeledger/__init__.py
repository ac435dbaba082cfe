"""Customer/project/task taxonomy with a time-entry consistency engine."""
