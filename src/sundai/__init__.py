"""
SundAI: clinic management dashboard assistant

Conversational command-execution core for a clinic dashboard. Assistant output
is resolved to named domain actions which read and mutate patients,
appointments, deadlines and inventory through a persistence collaborator.
"""

__version__ = "0.1.0"
__author__ = "SundAI Team"
__description__ = "Clinic management dashboard assistant"
