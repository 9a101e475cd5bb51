"""
Wiki entity references and their string form.
"""
