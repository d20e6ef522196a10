"""Infrastructure service implementations (notifications)."""
