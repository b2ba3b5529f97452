"""Project Tracker web dashboard"""
