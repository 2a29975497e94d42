"""Admin moderation screens"""
