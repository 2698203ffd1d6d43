"""byteweaver: bundle the files of a directory tree into a single document."""

__version__ = "0.1.0"
