# Remote table repositories
