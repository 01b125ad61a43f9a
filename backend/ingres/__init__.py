"""
Ingres Groundwater Chat
Conversational groundwater analysis over a fixed district dataset, backed by Groq
"""

__version__ = "1.0.0"
