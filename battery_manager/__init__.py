"""
Battery Manager - Charge Limit Reminder

Polls the device battery at a fixed interval and raises a notification when the
charge reaches the configured limit while charging, so the charger can be
unplugged before the battery is overcharged.
"""

__version__ = "1.0.0"
__author__ = "Battery Manager Team"
