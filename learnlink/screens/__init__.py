"""Screens, one per route"""
