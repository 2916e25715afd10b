"""CSS styles for the slurmtop dashboard."""

APP_CSS = """
Screen { layout: vertical; overflow: hidden; }
.bar { height: 1; }

/* The board draws its own title and controls bars */
.board {
    height: 1fr;
    width: 100%;
    overflow: hidden;
}

.status {
    background: $primary-darken-2;
    padding-left: 1;
}
"""
