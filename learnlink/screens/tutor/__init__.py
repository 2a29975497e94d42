"""Tutor screens"""
