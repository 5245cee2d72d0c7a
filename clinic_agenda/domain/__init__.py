"""Business domains, one package per bounded context (schemas, repository, service, router)"""
