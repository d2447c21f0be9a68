"""
HTML pages for students.

Plain string templates, escaped at the boundary. Markup is intentionally
minimal; the forms post the same field names the relay's records use.
"""

from html import escape
from typing import Optional

from students.models import StudentConfig

GRAPH_API_VERSION = "v22.0"

_LAYOUT = """<!DOCTYPE html>
<html lang="es">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
               max-width: 760px; margin: 2rem auto; padding: 0 1rem; color: #24292f; }}
        label {{ display: block; margin-top: 1rem; font-weight: 600; }}
        input {{ width: 100%; padding: .5rem; box-sizing: border-box; }}
        button {{ margin-top: 1.5rem; padding: .6rem 1.2rem; }}
        pre {{ background: #f6f8fa; padding: 1rem; overflow-x: auto; }}
        .error {{ color: #cf222e; }}
    </style>
</head>
<body>
{body}
</body>
</html>"""


def _page(title: str, body: str) -> str:
    return _LAYOUT.format(title=escape(title), body=body)


def _field(name: str, label: str, value: str = "", required: bool = True, kind: str = "text") -> str:
    return (
        f'<label for="{name}">{escape(label)}</label>'
        f'<input type="{kind}" id="{name}" name="{name}" value="{escape(value)}"'
        f'{" required" if required else ""}>'
    )


def render_registration_page() -> str:
    body = f"""
<h1>Registro de estudiantes</h1>
<p>Conecta tu número de WhatsApp Business con tu flujo de IA.</p>
<form method="post" action="/">
    {_field("studentName", "Nombre")}
    {_field("phoneNumberId", "Phone Number ID")}
    {_field("completeFlowiseUrl", "URL completa del flujo IA (…/api/v1/prediction/<id>)", kind="url")}
    {_field("accessToken", "Access Token")}
    {_field("webhookVerifyToken", "Webhook Verify Token (opcional)", required=False)}
    <button type="submit">Registrar</button>
</form>
<p><a href="/edit">Editar mi configuración</a> · <a href="/policies">Políticas de uso</a></p>
"""
    return _page("Registro de estudiantes", body)


_EDIT_SCRIPT = """<script>
async function authenticate() {
    const phoneId = document.getElementById('authPhoneId').value.trim();
    const token = document.getElementById('authToken').value;
    const errorBox = document.getElementById('errorMsg');
    errorBox.textContent = '';

    if (!phoneId || !token) {
        errorBox.textContent = 'Por favor completa todos los campos';
        return;
    }

    try {
        const response = await fetch('/edit', {
            method: 'POST',
            headers: { 'Content-Type': 'application/json' },
            body: JSON.stringify({ action: 'authenticate', phoneNumberId: phoneId, verifyToken: token })
        });
        const data = await response.json();

        if (!response.ok) {
            errorBox.textContent = data.error || 'Credenciales incorrectas';
            return;
        }

        document.getElementById('phoneNumberId').value = data.phoneNumberId;
        document.getElementById('verifyToken').value = token;
        document.getElementById('studentName').value = data.studentName || '';
        document.getElementById('completeFlowiseUrl').value = data.completeFlowUrl || '';
        document.getElementById('accessToken').value = data.accessToken || '';
        document.getElementById('webhookVerifyToken').value = data.webhookVerifyToken || token;

        document.getElementById('authStep').hidden = true;
        document.getElementById('editStep').hidden = false;
    } catch (error) {
        errorBox.textContent = 'Error de conexión';
    }
}
</script>"""


def render_edit_page() -> str:
    body = f"""
<h1>Editar configuración</h1>
<div id="authStep">
    <p>Autentícate con tu Phone Number ID y tu Webhook Verify Token para
    cargar tu configuración actual.</p>
    {_field("authPhoneId", "Phone Number ID")}
    {_field("authToken", "Webhook Verify Token actual", kind="password")}
    <button type="button" onclick="authenticate()">Continuar</button>
</div>
<form id="editStep" method="post" action="/edit" hidden>
    <input type="hidden" name="action" value="update">
    <input type="hidden" id="phoneNumberId" name="phoneNumberId">
    <input type="hidden" id="verifyToken" name="verifyToken">
    {_field("studentName", "Nombre")}
    {_field("completeFlowiseUrl", "URL completa del flujo IA", kind="url")}
    {_field("accessToken", "Access Token")}
    {_field("webhookVerifyToken", "Webhook Verify Token")}
    <button type="submit">Guardar cambios</button>
</form>
<p class="error" id="errorMsg"></p>
<p><a href="/">Volver al registro</a></p>
{_EDIT_SCRIPT}
"""
    return _page("Editar configuración", body)


def render_success_page(record: StudentConfig, webhook_url: str) -> str:
    if record.webhook_verify_token:
        token_hint = f"<code>{escape(record.webhook_verify_token)}</code>"
    else:
        token_hint = "el token global que te entregó tu instructor"

    body = f"""
<h1>¡Listo, {escape(record.student_name)}!</h1>
<p>Tu número <code>{escape(record.phone_number_id)}</code> quedó conectado al flujo
<code>{escape(record.prediction_url)}</code>.</p>
<h2>Configura el webhook en Meta</h2>
<ul>
    <li>Callback URL: <code>{escape(webhook_url)}</code></li>
    <li>Verify Token: {token_hint}</li>
    <li>Campo suscrito: <code>messages</code></li>
</ul>
<h2>Custom Function para tu flujo</h2>
<p>Pega este código en un nodo Custom Function para responder por WhatsApp.</p>
<pre><code>{escape(render_custom_function_code(record))}</code></pre>
<p><a href="/edit">Editar mi configuración</a></p>
"""
    return _page("Registro exitoso", body)


def render_error_page(message: str) -> str:
    body = f"""
<h1>No se pudo completar la solicitud</h1>
<p class="error">{escape(message)}</p>
<p><a href="/">Volver</a></p>
"""
    return _page("Error", body)


def render_policies_page(service_name: Optional[str] = None) -> str:
    body = f"""
<h1>Políticas de uso</h1>
<p>{escape(service_name or "Este servicio")} reenvía los mensajes que recibe tu
número de WhatsApp Business al flujo de IA que registraste. No almacena el
contenido de los mensajes.</p>
<ul>
    <li>Solo se guarda la configuración que envías en el registro.</li>
    <li>El Access Token se usa únicamente en el código que generas para tu flujo.</li>
    <li>Cada estudiante es responsable de las respuestas de su flujo.</li>
    <li>El servicio puede dejar de reenviar mensajes a flujos que no respondan.</li>
</ul>
<p><a href="/">Volver</a></p>
"""
    return _page("Políticas de uso", body)


def render_custom_function_code(record: StudentConfig) -> str:
    """
    JavaScript for a Flowise Custom Function node that sends the flow's
    output back to the sender through the WhatsApp Cloud API.

    Reads `$flow.state.whatsapp_data` (a JSON string holding at least
    `from`, filled from CONTEXTO_WHATSAPP by the flow) and `$flow.state.output`.
    """
    access_token = _js_string(record.access_token)
    phone_number_id = _js_string(record.phone_number_id)
    return f"""/**
 * WhatsApp reply - Custom Function
 */
const https = require('https');

const ACCESS_TOKEN = {access_token};
const PHONE_NUMBER_ID = {phone_number_id};

function makeWhatsAppRequest(phoneNumber, message) {{
  return new Promise((resolve, reject) => {{
    const requestBody = JSON.stringify({{
      messaging_product: 'whatsapp',
      to: phoneNumber,
      type: 'text',
      text: {{ body: message }}
    }});

    const req = https.request({{
      hostname: 'graph.facebook.com',
      path: `/{GRAPH_API_VERSION}/${{PHONE_NUMBER_ID}}/messages`,
      method: 'POST',
      headers: {{
        'Authorization': `Bearer ${{ACCESS_TOKEN}}`,
        'Content-Type': 'application/json'
      }}
    }}, (res) => {{
      let data = '';
      res.on('data', chunk => data += chunk);
      res.on('end', () => {{
        try {{
          const parsed = JSON.parse(data);
          res.statusCode === 200 ? resolve(parsed) : reject(parsed);
        }} catch (e) {{
          reject({{ error: 'Invalid JSON', body: data }});
        }}
      }});
    }});

    req.on('error', reject);
    req.write(requestBody);
    req.end();
  }});
}}

try {{
  if (!$flow.state.whatsapp_data) {{
    return 'No whatsapp_data in flow state';
  }}
  const whatsappData = JSON.parse($flow.state.whatsapp_data);
  const message = $flow.state.output || 'Sin respuesta';

  if (!whatsappData.from) {{
    return 'Missing phone number in whatsapp_data';
  }}

  await makeWhatsAppRequest(whatsappData.from, message);
  return `Sent to ${{whatsappData.from}}: ${{message}}`;
}} catch (error) {{
  return `Failed: ${{JSON.stringify(error)}}`;
}}"""


def _js_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"
