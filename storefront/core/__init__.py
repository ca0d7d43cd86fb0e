"""Core configuration, persistence and security"""
