"""Contract generation pipeline services"""
