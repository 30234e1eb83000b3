"""CLIコマンド"""
