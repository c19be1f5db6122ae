"""
Intent subsystem.

Components:
- models.py: IntentRecord (one parsed command) and the Intent enum
- prompt.py: instructions sent to the model
- normalizer.py: raw model text -> IntentRecord
- timeparse.py: relative time expressions -> YYYY-MM-DD
"""
