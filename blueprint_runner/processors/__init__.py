from .packages import PackagesProcessor

__all__ = [
    "PackagesProcessor",
    "default_processors",
]


def default_processors():
    return {
        PackagesProcessor.category: PackagesProcessor(),
    }
