"""LuckyWheel - prize wheel spin engine with AI congratulations."""

__version__ = "0.1.0"
