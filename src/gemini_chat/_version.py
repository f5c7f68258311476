import importlib.metadata

try:
    __version__ = importlib.metadata.version("gemini-chat")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"
