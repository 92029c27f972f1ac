"""
SCUM Feed - Game Server Log Relay
Tails SCUM dedicated server logs and relays parsed game events to Discord
"""

__version__ = "1.0.0"
