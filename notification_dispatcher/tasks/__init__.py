"""Background execution: Taskiq broker, notification tasks and scheduled jobs."""
