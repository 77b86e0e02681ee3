"""Invoice lifecycle service"""
