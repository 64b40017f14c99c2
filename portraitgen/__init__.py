"""Portrait variation generation service.

Turns a previously uploaded portrait into AI-generated variations, persists the
generated images and records one audit entry per successful run.
"""
