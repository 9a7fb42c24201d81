"""
HTTP surface of the transcription robot
"""
