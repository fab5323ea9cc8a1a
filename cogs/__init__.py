"""Cogs package - Message command handlers"""
