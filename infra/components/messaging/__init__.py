"""
Messaging components.

Components:
- NotificationsComponent: SNS topic, Lambda subscriber, DynamoDB table, GCP bucket
"""

from infra.components.messaging.notifications import NotificationsComponent, NotificationOutputs

__all__ = [
    "NotificationsComponent",
    "NotificationOutputs",
]
