__version__ = "1.0.0"
__description__ = "transitnet : shaped, sorted and paginated REST collections for a transportation network"
