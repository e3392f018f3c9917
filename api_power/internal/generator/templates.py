class Templates:
    """Шаблоны для генерации файлов"""

    generated_notice = "/* Файл сгенерирован api-power, не редактируйте его вручную */"

    module_header = """/* tslint:disable */
/* eslint-disable */

{notice}

// @ts-ignore
type FileData = File
"""

    request_import = """// @ts-ignore
import request from '{request_path}'
"""

    request_hook_maker_import = """// @ts-ignore
import makeRequestHook from '{request_hook_maker_path}'
"""

    index_header = """/* prettier-ignore-start */
/* tslint:disable */
/* eslint-disable */

{notice}
"""

    request = """export type RequestServer = 'prod' | 'dev' | 'mock'

export interface RequestOptions {{
    server?: RequestServer
    responseType?: 'json' | 'text' | 'blob'
    headers?: Record<string, string>
}}

export const baseUrls: Record<RequestServer, string> = {{
    prod: '{prod_url}',
    dev: '{dev_url}',
    mock: '{mock_url}',
}}

async function send<TResponseData>(
    method: string,
    path: string,
    params?: Record<string, any>,
    options: RequestOptions = {{}}
): Promise<TResponseData> {{
    const baseUrl = baseUrls[options.server || 'prod']
    let url = `${{baseUrl}}${{path}}`
    const init: RequestInit = {{ method, headers: {{ ...options.headers }} }}

    if (params && (method === 'GET' || method === 'HEAD' || method === 'OPTIONS')) {{
        const query = new URLSearchParams()
        Object.keys(params).forEach(key => {{
            if (params[key] !== undefined && params[key] !== null) {{
                query.append(key, String(params[key]))
            }}
        }})
        const search = query.toString()
        if (search) {{
            url += (url.includes('?') ? '&' : '?') + search
        }}
    }} else if (params) {{
        const hasFile = Object.keys(params).some(key => params[key] instanceof Blob)
        if (hasFile) {{
            const form = new FormData()
            Object.keys(params).forEach(key => form.append(key, params[key]))
            init.body = form
        }} else {{
            init.headers = {{ 'Content-Type': 'application/json', ...init.headers }}
            init.body = JSON.stringify(params)
        }}
    }}

    const response = await fetch(url, init)
    if (!response.ok) {{
        throw new Error(`[${{response.status}}] ${{method}} ${{path}}`)
    }}
    if (options.responseType === 'blob') {{
        return (await response.blob()) as any
    }}
    if (options.responseType === 'text') {{
        return (await response.text()) as any
    }}
    return response.json()
}}

function bind(method: string) {{
    return <TResponseData>(path: string, params?: Record<string, any>, options?: RequestOptions) =>
        send<TResponseData>(method, path, params, options)
}}

const request = {{
    get: bind('GET'),
    post: bind('POST'),
    put: bind('PUT'),
    delete: bind('DELETE'),
    patch: bind('PATCH'),
    head: bind('HEAD'),
    options: bind('OPTIONS'),
}}

export default request
"""

    request_hook_maker = """import {{ useEffect, useState }} from 'react'

export default function makeRequestHook<TParams, TResponseData>(
    requestFunction: (params: TParams) => Promise<TResponseData>
) {{
    return function useRequest(params: TParams) {{
        const [data, setData] = useState<TResponseData | undefined>(undefined)
        const [error, setError] = useState<unknown>(undefined)
        const [loading, setLoading] = useState(true)
        const key = JSON.stringify(params)

        useEffect(() => {{
            let cancelled = false
            setLoading(true)
            requestFunction(params)
                .then(result => {{
                    if (!cancelled) setData(result)
                }})
                .catch(reason => {{
                    if (!cancelled) setError(reason)
                }})
                .finally(() => {{
                    if (!cancelled) setLoading(false)
                }})
            return () => {{
                cancelled = true
            }}
        }}, [key])

        return {{ data, error, loading }}
    }}
}}
"""
