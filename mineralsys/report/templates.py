"""Default jinja2 templates for the markup and typesetting documents."""

from __future__ import annotations

MARKUP_TEMPLATE = """<!DOCTYPE html>
<html lang="{{ lang_code }}" dir="{{ lang_dir }}">
<head>
  <meta charset="utf-8">
  <title>{{ mineral_name }} | Mineral report</title>
  <style>
    body { font-family: Georgia, serif; max-width: 52rem; margin: 2rem auto; color: #222; }
    header p { color: #666; }
    table { border-collapse: collapse; }
    th, td { text-align: left; padding: 0.2rem 0.8rem 0.2rem 0; }
    img { max-width: 24rem; }
  </style>
</head>
<body>
<header>
  <h1>{{ mineral_name }}</h1>
  <p>{{ mineral_family }} &middot; {{ folder_name }} &middot; generated {{ generated_utc }}</p>
</header>
{% if image_file %}
<figure><img src="{{ image_file }}" alt="{{ mineral_name }}"></figure>
{% endif %}
{% if description %}
<section>
  <h2>Description</h2>
  <p>{{ description }}</p>
</section>
{% endif %}
<section>
  <h2>Report context</h2>
  <dl>
    <dt>Audience</dt><dd>{{ audience }}</dd>
    <dt>Purpose</dt><dd>{{ purpose }}</dd>
{% if site_context %}
    <dt>Site context</dt><dd>{{ site_context }}</dd>
{% endif %}
  </dl>
</section>
<section>
  <h2>Technical properties</h2>
  <table>
{% for row in properties %}
    <tr><th>{{ row.label }}</th><td>{{ row.value }}</td></tr>
{% endfor %}
  </table>
  <p>Technical completeness: {{ completeness }}%</p>
</section>
{% if element_breakdown %}
<section>
  <h2>Major elements</h2>
  <table>
{% for share in element_breakdown %}
    <tr><th>{{ share.name }}</th><td>{{ share.percent }} wt%</td></tr>
{% endfor %}
  </table>
</section>
{% endif %}
<section>
  <h2>Summary</h2>
  <p>{{ summary }}</p>
</section>
<section>
  <h2>Recommendations</h2>
{% if recommendations %}
  <ol>
{% for item in recommendations %}
    <li>{{ item }}</li>
{% endfor %}
  </ol>
{% else %}
  <p>No recommendations.</p>
{% endif %}
</section>
{% if notes %}
<section>
  <h2>Notes</h2>
  <p>{{ notes }}</p>
</section>
{% endif %}
</body>
</html>
"""

# Delimiters are \VAR{...} and \BLOCK{...}; every \VAR value is LaTeX-escaped.
TYPESET_TEMPLATE = r"""\documentclass[11pt,a4paper]{article}
\usepackage{fontspec}
\usepackage[margin=2.2cm]{geometry}
\usepackage{graphicx}
\usepackage{booktabs}
\usepackage{enumitem}
\usepackage[hidelinks]{hyperref}

\title{\VAR{mineral_name}}
\author{\VAR{mineral_family} \textbar{} \texttt{\VAR{folder_name}}}
\date{Generated \VAR{generated_utc}}

\begin{document}
\maketitle

\BLOCK{if image_file}
\begin{center}
\includegraphics[width=0.45\textwidth]{\VAR{image_file}}
\end{center}

\BLOCK{endif}
\BLOCK{if description}
\section*{Description}
\VAR{description}

\BLOCK{endif}
\section*{Report context}
\begin{description}[leftmargin=3cm,style=nextline]
\item[Audience] \VAR{audience}
\item[Purpose] \VAR{purpose}
\BLOCK{if site_context}
\item[Site context] \VAR{site_context}
\BLOCK{endif}
\end{description}

\section*{Technical properties}
\begin{tabular}{ll}
\toprule
\BLOCK{for row in properties}
\VAR{row.label} & \VAR{row.value} \\
\BLOCK{endfor}
\bottomrule
\end{tabular}

\medskip
Technical completeness: \VAR{completeness}\%

\BLOCK{if element_breakdown}
\section*{Major elements}
\begin{tabular}{lr}
\toprule
Element & wt\% \\
\midrule
\BLOCK{for share in element_breakdown}
\VAR{share.name} & \VAR{share.percent} \\
\BLOCK{endfor}
\bottomrule
\end{tabular}

\BLOCK{endif}
\section*{Summary}
\VAR{summary}

\section*{Recommendations}
\BLOCK{if recommendations}
\begin{enumerate}
\BLOCK{for item in recommendations}
\item \VAR{item}
\BLOCK{endfor}
\end{enumerate}
\BLOCK{else}
No recommendations.
\BLOCK{endif}
\BLOCK{if notes}

\section*{Notes}
\VAR{notes}
\BLOCK{endif}

\end{document}
"""

__all__ = ["MARKUP_TEMPLATE", "TYPESET_TEMPLATE"]
