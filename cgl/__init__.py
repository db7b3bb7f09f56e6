"""Graphics building blocks: vectors, matrices, colours, base64, timing, a renderer base class and a small XML DOM."""

__version__ = "0.1.0"