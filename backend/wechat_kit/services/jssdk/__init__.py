"""JS-bridge ``wx.config`` signing."""
