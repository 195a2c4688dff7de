"""
HTTP API package for the Image Toolkit
"""
