"""
Code shared by the jsonrelay server and client.
"""
