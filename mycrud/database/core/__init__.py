"""Service functions orchestrating DAO calls inside managed transactions."""
