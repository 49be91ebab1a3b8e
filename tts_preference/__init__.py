"""
TTS Preference Testing

Statistics for A/B listening tests of text-to-speech models: listeners pick
the sample they prefer and this package decides whether the resulting
selection counts deviate from chance.
"""

__version__ = "0.1.0"
__author__ = "TTS Evaluation Team"
