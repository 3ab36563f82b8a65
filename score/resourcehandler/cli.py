import click
import xxhash
from urllib.parse import urlparse
from ._init import Request
import email
import io


@click.group()
def main():
    """
    Inspects served resources.
    """
    pass


def _parse_headers(headers):
    if not headers:
        return {}
    message = email.message_from_file(io.StringIO('\n'.join(headers)))
    return dict(message.items())


@main.command()
@click.option('-H', '--header', 'headers', multiple=True)
@click.argument('path')
@click.pass_context
def resolve(clickctx, path, headers):
    """
    Shows the resource file of a request path
    """
    resourcehandler = clickctx.obj['conf'].load('resourcehandler')
    resource = resourcehandler.resolve(path, _parse_headers(headers))
    if resource is None:
        raise click.ClickException('No resource found for %s' % path)
    print(resource.get_resource_file_path())
    print(resource.get_url())


@main.command('request-path')
@click.option('-l', '--locale')
@click.argument('library')
@click.argument('name')
@click.pass_context
def request_path(clickctx, library, name, locale):
    """
    Provides the request path of a resource
    """
    resourcehandler = clickctx.obj['conf'].load('resourcehandler')
    path = resourcehandler.get_request_path(name, library, locale)
    if path is None:
        raise click.ClickException(
            'Resource %s not found in library %s' % (name, library))
    print(path)


@main.command('request-response')
@click.option('-H', '--header', 'headers', multiple=True)
@click.argument('url')
@click.pass_context
def request_response(clickctx, url, headers):
    """
    Provides the response to a resource request
    """
    resourcehandler = clickctx.obj['conf'].load('resourcehandler')
    request = Request(urlparse(url).path, _parse_headers(headers))
    status, headers, body = resourcehandler.get_request_response(request)
    print(status)
    for key, value in headers.items():
        print('%s: %s' % (key, value))
    print('')
    if body and 'Content-Encoding' not in headers:
        print(body.decode('UTF-8', errors='replace'))


@main.command()
@click.option('-H', '--header', 'headers', multiple=True)
@click.argument('url')
@click.pass_context
def digest(clickctx, url, headers):
    """
    Provides a hash of the served content.
    """
    resourcehandler = clickctx.obj['conf'].load('resourcehandler')
    request = Request(urlparse(url).path, _parse_headers(headers))
    status, headers, body = resourcehandler.get_request_response(request)
    if status != 200:
        raise click.ClickException('Request failed with status %d' % status)
    print(xxhash.xxh64(body).hexdigest())


if __name__ == '__main__':
    main()
