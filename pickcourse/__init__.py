"""
pickcourse – list the courses found under the courses root and launch `study` for them.
"""
