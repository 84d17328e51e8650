def identity(request):
    return {'identity': getattr(request, 'identity', None)}
