"""Wi-Fi station and embedded web server blocks."""

from __future__ import annotations

from blockgen.codegen._constants import _WEB_REGISTRY, Order
from blockgen.codegen.compile import statement_to_code, value_to_code
from blockgen.codegen.context import CodegenContext
from blockgen.codegen.generators.dashboard import ensure_dashboard_runtime
from blockgen.codegen.generators.variables import function_text, variable_globals
from blockgen.codegen.registry import GeneratorRegistry
from blockgen.core.node import Node

CONNECT_FUNCTION = "connect_to_wifi"
SERVER_FUNCTION = "start_web_and_ws_server"

_CONNECT = f"""def {CONNECT_FUNCTION}(ssid, password):
    global _wlan
    _wlan = network.WLAN(network.STA_IF)
    _wlan.active(True)
    if _wlan.isconnected():
        return True
    print('Connecting to Wi-Fi...')
    _wlan.connect(ssid, password)
    for _ in range(15):
        if _wlan.isconnected():
            break
        print('.')
        time.sleep(1)
    if _wlan.isconnected():
        print('Connected! IP:', _wlan.ifconfig()[0])
        return True
    print('Connection failed.')
    return False"""

_SERVER_THREAD = """def _web_server_thread():
    try:
        addr = socket.getaddrinfo('0.0.0.0', 80)[0][-1]
        s = socket.socket()
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        s.bind(addr)
        s.listen(5)
        print('Web server listening on port 80')

        def _ws_client_thread(ws):
            try:
                ws.serve_forever()
            finally:
                if ws in _ws_clients:
                    _ws_clients.remove(ws)

        while True:
            cl = None
            try:
                cl, addr = s.accept()
                cl.settimeout(2.0)
                try:
                    request_bytes = cl.recv(1024)
                except OSError:
                    cl.close()
                    continue
                cl.settimeout(None)
                if not request_bytes:
                    cl.close()
                    continue
                request_str = request_bytes.decode('utf-8', 'ignore')
                if 'Upgrade: websocket' in request_str:
                    ws_server = websocket_server.WsServer(
                        cl, on_message=_ws_callback, request_str=request_str
                    )
                    _ws_clients.append(ws_server)
                    try:
                        _thread.start_new_thread(_ws_client_thread, (ws_server,))
                    except OSError:
                        # Pico W cannot nest threads; serve this socket inline.
                        _ws_client_thread(ws_server)
                    continue
                if callable(_web_request_handler):
                    _web_request_handler()
                response = (
                    'HTTP/1.1 200 OK\\r\\nContent-Type: text/html\\r\\n'
                    'Connection: close\\r\\n\\r\\n' + str(_web_html_content)
                )
                cl.sendall(response.encode('utf-8'))
                cl.close()
            except Exception as e:
                if cl:
                    cl.close()
                print('Server Error:', e)
    except Exception as e:
        print('Fatal Server Error:', e)"""

_START_SERVER = f"""def {SERVER_FUNCTION}():
    if _wlan and _wlan.isconnected():
        try:
            _thread.start_new_thread(_web_server_thread, ())
            print('Server thread started.')
        except Exception as e:
            print('Failed to start thread:', e)
    else:
        print('Wi-Fi not connected. Server aborted.')"""


def _ensure_web_globals(ctx: CodegenContext) -> None:
    ctx.define("wlan_global", "_wlan = None")
    ctx.define("web_request_handler", "_web_request_handler = None")
    ctx.define(
        "web_html_content",
        '_web_html_content = "<h1>Server Running</h1><p>Use blocks to define content.</p>"',
    )


def register_wifi_generators(registry: GeneratorRegistry) -> None:
    @registry.register("wifi_connect", output="statement")
    def wifi_connect(node: Node, ctx: CodegenContext) -> str:
        ssid = value_to_code(node, "SSID", Order.NONE, ctx, '""')
        password = value_to_code(node, "PASSWORD", Order.NONE, ctx, '""')
        ctx.add_import("network")
        ctx.add_import("time")
        ctx.define("wlan_global", "_wlan = None")
        ctx.add_function(CONNECT_FUNCTION, _CONNECT)
        return f"{CONNECT_FUNCTION}({ssid}, {password})\n"

    @registry.register("wifi_start_web_server", output="statement")
    def wifi_start_web_server(node: Node, ctx: CodegenContext) -> str:
        ctx.add_import("socket")
        ctx.add_import("_thread")
        ctx.add_import("websocket_server")
        _ensure_web_globals(ctx)
        ensure_dashboard_runtime(ctx)
        ctx.add_function("_web_server_thread", _SERVER_THREAD)
        ctx.add_function(SERVER_FUNCTION, _START_SERVER)
        # the server thread needs the main loop kept alive
        ctx.require_heartbeat()
        return f"{SERVER_FUNCTION}()\n"

    @registry.register("wifi_on_web_request", output="statement")
    def wifi_on_web_request(node: Node, ctx: CodegenContext) -> str:
        _ensure_web_globals(ctx)
        handler = ctx.names.distinct("on_web_request")
        globals_ = sorted({"_web_html_content", *variable_globals(node, ctx)})
        body = statement_to_code(node, "DO", ctx)
        ctx.add_function(handler, function_text(handler, (), body, globals_=globals_, ctx=ctx))
        ctx.register_handler(_WEB_REGISTRY, "request", handler)
        return ""

    @registry.register("wifi_send_web_response", output="statement")
    def wifi_send_web_response(node: Node, ctx: CodegenContext) -> str:
        _ensure_web_globals(ctx)
        html = value_to_code(node, "HTML", Order.NONE, ctx, '""')
        return f"_web_html_content = str({html})\n"
