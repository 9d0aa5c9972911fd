"""Shared configuration and logging for the workflow templating engine"""
