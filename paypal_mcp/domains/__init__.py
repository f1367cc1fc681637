"""
Business domains and their tool providers
"""
