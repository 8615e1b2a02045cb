"""Test doubles."""
from .fake_gateway import FakePaymentGateway
from .recording_notifier import FailingNotifier, RecordingNotifier

__all__ = ["FailingNotifier", "FakePaymentGateway", "RecordingNotifier"]
