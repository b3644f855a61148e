"""Result-returning query services."""
