"""Console front end: REPL and notifier."""
