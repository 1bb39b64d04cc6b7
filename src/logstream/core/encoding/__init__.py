"""Line encoders for log records."""
