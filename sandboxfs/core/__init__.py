"""
sandboxfs core components
"""
