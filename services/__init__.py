"""
Service layer for the Image Toolkit
"""
