"""
Textos y sugerencias del asistente.
"""
