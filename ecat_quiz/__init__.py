"""Quiz persistence layer for the ECAT quiz application."""
