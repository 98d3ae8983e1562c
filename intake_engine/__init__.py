"""
Intake conditional-logic and validation engine
"""
