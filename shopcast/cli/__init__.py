"""Developer CLI for previewing engine output from JSON feeds."""
