"""Pure grading logic. No database, no Flask."""
