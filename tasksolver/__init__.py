"""HTTP server that queues Python scripts and executables and runs them on a pool of workers."""

__version__ = "0.1.0"