"""Project Tracker utilities"""
