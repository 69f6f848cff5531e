"""RubberEco admin notification service.

Subpackages follow the layered layout: ``domain`` holds the notification
records, ``application`` the feed, producer and action logic,
``infrastructure`` the store, storage and delivery channels, and
``interfaces`` the FastAPI surface.
"""
