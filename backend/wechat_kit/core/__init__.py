"""Configuration, logging, error translation and Flask wiring."""
