"""Project configuration: settings and logging."""
