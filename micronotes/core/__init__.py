# Core infrastructure package
