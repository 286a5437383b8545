"""
Application layer: services called by command handlers and the chatbot.
"""
