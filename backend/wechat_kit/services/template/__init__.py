"""Template message sending and listing."""
