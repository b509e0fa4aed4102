"""Media Gallery - front gallery and media dashboard backend."""
